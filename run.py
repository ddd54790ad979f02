#!/usr/bin/env python3
"""
MatchSheet - Main Entry Point
Team sheet generator: line-up, formation and match details to PNG / PDF

Copyright (c) 2025 [Your Name]. All Rights Reserved.
This software is proprietary and confidential. Unauthorized copying, modification,
distribution, or use of this software, via any medium, is strictly prohibited.
"""

from matchsheet.main import main

if __name__ == '__main__':
    main()
