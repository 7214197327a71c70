import sys

from b58codec.cli import main

sys.exit(main())
