#!/usr/bin/env python3
import os
import sys

# Allow running from a checkout without installing
parent_dir = os.path.dirname(os.path.abspath(__file__))
sys.path.insert(0, parent_dir)

if __name__ == "__main__":
    from quizbot.main import main

    sys.exit(main())
