import sys

from sampletracer.cli import main

sys.exit(main())
