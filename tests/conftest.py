"""Test environment setup."""

import os

# Rich truncates long option names in --help at the default 80 columns;
# give the help renderer a wide enough terminal for the CLI help tests.
os.environ["COLUMNS"] = "120"
