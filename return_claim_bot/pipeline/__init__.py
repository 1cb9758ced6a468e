"""Claim-submission pipeline: relay files, fan out, write the row, notify."""
