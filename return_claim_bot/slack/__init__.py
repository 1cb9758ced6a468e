"""Slack integration for the return-claim bot.

WHY: Claims are filed from Slack: a slash command opens a modal, and the
modal submission starts the claim pipeline.

HOW: slack-bolt's AsyncApp handles request verification, acks and
listener dispatch. It is served either over HTTP (FastAPI adapter, see
return_claim_bot.server.app) or over Socket Mode.

RULES:
- All Slack commands and views must be ack()'d within 3 seconds
- The bot token also authenticates file downloads from Slack
"""
