"""各页面的表单字段定义."""
