"""
Use Cases

Organized by domain folder:
- invitations/: Member invitation issuance, redemption and lifecycle
"""
