#!/usr/bin/env python
#
# $ python -m pizzapi [host]
#
from .app import main

main()
