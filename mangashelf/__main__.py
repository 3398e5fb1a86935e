"""Allow `python -m mangashelf`."""

from mangashelf.cli.main import main

main()
