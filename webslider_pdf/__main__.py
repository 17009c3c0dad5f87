import sys

from webslider_pdf.cli import main

sys.exit(main())
