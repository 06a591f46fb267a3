import os
import sys

# Allow importing the package from a source checkout and the helpers next to the tests.
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src")))
sys.path.insert(0, os.path.abspath(os.path.dirname(__file__)))
