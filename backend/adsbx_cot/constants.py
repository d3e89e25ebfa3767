# backend/adsbx_cot/constants.py

"""
Global constants used across modules: the User-Agent strings for outbound
requests and the callsign placeholder understood in include entries.
"""

USER_AGENT = "adsbx-cot/1.0 (+https://github.com/adsbx-cot/adsbx-cot)"

#: Some CSV hosts (Google Drive in particular) refuse non-browser agents.
BROWSER_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/96.0.4664.110 Safari/537.36"
)

#: Replaced by the live flight callsign inside an include entry's callsign.
CALLSIGN_PLACEHOLDER = "$CALLSIGN"
