"""Package entry point for ``python -m return_claim_bot``.

WHY: The bot runs either as an HTTP server (Slack posts to a public URL)
or over Socket Mode (outbound WebSocket, no public URL).

RULES:
- ``--socket`` starts Socket Mode
- Without ``--socket``, starts the FastAPI/uvicorn HTTP server
"""

import sys

if __name__ == "__main__":
    if "--socket" in sys.argv:
        from return_claim_bot.slack.bot import main
        main()
    else:
        from return_claim_bot.server.app import run_api
        run_api()
