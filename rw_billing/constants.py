"""
Program thresholds and fixed wording shared by the rule modules.
"""

# Medicare patients above this FPL % are ineligible for pharmacy assistance
MEDICARE_FPL_LIMIT = 400

# Commercial patients below this FPL % go through LPAP, otherwise MEDCO
LPAP_FPL_LIMIT = 50

# MMCAP price (dollars) at or above which a supervisor must approve
MMCAP_SUPERVISOR_THRESHOLD = 50

SHADOW_CLAIM_NOTE = "SHADOW CLAIM REQUIRED: Run PI2MEDCO on all prescriptions for reporting."
MEDICARE_NO_MFG_NOTE = "NEVER use Manufacturer Copay Cards for Medicare."

MEDICARE_RULE_CALLOUT = "MEDICARE RULE: No manufacturer copay cards allowed."
PI2MEDCO_CALLOUT = "PI2MEDCO REQUIRED"

EMPTY_DISPLAY = "—"
