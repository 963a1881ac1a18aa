"""Parser for the Glicol language and a graph of audio nodes processed block by block."""

__version__ = "0.14.0.dev0"