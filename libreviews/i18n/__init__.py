"""界面语言与消息键."""
