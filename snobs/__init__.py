"""
Snobs: assigns Stash user groups as pull request reviewers over HTTP.
"""

__version__ = "1.0.0"
