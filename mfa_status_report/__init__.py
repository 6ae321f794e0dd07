"""
MFA Status Report
=================
Read-only Microsoft Entra ID reporting tool.
Classifies the registered authentication methods of every signed-in member
account and exports a per-user MFA strength report.

WARNING: This tool operates in STRICT READ-ONLY mode.
         No user accounts or tenant settings will be modified.
"""

__version__ = "1.0.0"
__mode__ = "READ-ONLY"
