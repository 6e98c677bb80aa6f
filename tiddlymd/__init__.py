"""
tiddlymd
========

Converts TiddlyWiki JSON exports into Markdown documents.

- tiddlers/ - tag parsing, catalog, markup conversion and document assembly
- config/ - settings
- utils/ - logging
- writer - file output
- main - command line interface
"""

__version__ = "1.0.0"
