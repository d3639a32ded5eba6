"""cratefetch - crate 注册表索引查询与最新版本解析"""

__version__ = "0.1.0"
