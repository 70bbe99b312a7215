import sys

from bookstore_toolbag.demo import main

if __name__ == "__main__":
    sys.exit(main())
