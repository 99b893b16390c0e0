"""
CaseVault - case access and evidence custody client core
"""
__version__ = "1.0.0"
