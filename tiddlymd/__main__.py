from tiddlymd.main import cli

cli()
