#!/usr/bin/env python3
# install.py
# -*- coding: utf-8 -*-
"""
Entry point for the Phantom Tunnel manager.

    sudo python3 install.py            # interactive menu
    sudo python3 install.py install    # one operation, then exit
"""

from phantom_manager.cli import main

if __name__ == "__main__":
    main()
