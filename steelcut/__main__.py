# steelcut/__main__.py
# Package entrypoint so you can run:
#   python -m steelcut --help
#
# Examples:
#   python -m steelcut --pieces pieces.csv
#   python -m steelcut --pieces job.json --stock 12000 --out out/ --png plan.png

from __future__ import annotations

from .cli import main

if __name__ == "__main__":
    main()
