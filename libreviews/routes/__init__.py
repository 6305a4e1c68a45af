"""路由蓝图."""
