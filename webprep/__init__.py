"""webprep - batch conversion of media asset trees into web-ready renditions."""

__version__ = "0.3.0"
