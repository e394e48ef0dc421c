"""
                Najaf Restaurant Ordering

Session-based restaurant ordering backend: customers browse the menu and
check out, staff move orders through the kitchen pipeline, and the admin
gets a sales dashboard with AI-written tips.

Author: Khalil_Bannouri
Version: 1.0.0
License: MIT
"""

__version__ = "1.0.0"
__author__ = "Khalil_Bannouri"
