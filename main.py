#!/usr/bin/env python3
"""unitybuild - Android builds of Unity projects."""

from unitybuild.cli import main

if __name__ == "__main__":
    main()
