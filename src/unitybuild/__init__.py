"""Android build orchestration for Unity projects driven by a root
directory holding settings.json and output.json."""

__version__ = "0.1.0"
