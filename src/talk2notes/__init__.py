"""Talk2Notes - 讲座音视频 → 转录 → 结构化笔记"""

__version__ = "0.1.0"
