"""Return Claim Bot: Slack slash-command to Google Sheets claim pipeline.

WHY: Warehouse staff file return claims from Slack. Each claim updates one
row of a tracking spreadsheet and attaches photos of the returned item.
Doing this by hand means downloading images from Slack, uploading them to
Drive, sharing them, and pasting links into the sheet.

HOW: A modal collects the row number, status, notes and up to five images.
On submit the images are relayed from Slack to Drive concurrently, made
publicly viewable, and the row is overwritten with a fixed-width block of
cell values (status, notes, an IMAGE() formula, and the remaining links).

RULES:
- One command, one modal, one destination sheet
- The row write happens only after every relay succeeded
- The submitting user always gets exactly one outcome message
"""

__version__ = "0.1.0"
