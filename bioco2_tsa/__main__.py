# bioco2_tsa/__main__.py
"""
Enable running the package as a module: python -m bioco2_tsa

Equivalent to:
    bioco2-tsa [options...]
"""

from bioco2_tsa import main

if __name__ == "__main__":
    main()
