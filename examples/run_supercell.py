"""Build supercells from a JSON input file.

Usage examples:
  python examples/run_supercell.py --write-template examples/configs/supercell_template.json
  python examples/run_supercell.py --input examples/configs/srtio3_einstein.json
"""

from supercellpy.workflows.supercell_run import main


if __name__ == "__main__":
    main()
