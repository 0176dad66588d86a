"""Intake constants shared across the SDK.

These values are referenced by the engine, the traversal policy and the
fact extraction mapper.  They mirror conventions encoded in the YAML
catalogue under ``v1/``.

Several constants can be overridden via environment variables so that
deployments can adjust underwriting conventions without code changes.
"""

import os

# Free-text descriptions longer than this are cut for the case title.
# Overridable via INTAKE_TITLE_MAX_LENGTH env var.
TITLE_MAX_LENGTH = int(os.getenv("INTAKE_TITLE_MAX_LENGTH", "80"))
TITLE_ELLIPSIS = "…"

# Accepted year window for year questions: YEAR_MIN <= year < YEAR_MAX.
# Overridable via INTAKE_YEAR_MIN / INTAKE_YEAR_MAX env vars.
YEAR_MIN = int(os.getenv("INTAKE_YEAR_MIN", "1900"))
YEAR_MAX = int(os.getenv("INTAKE_YEAR_MAX", "2100"))

# Integer sex code the profile layer uses for women (Enter_sexe = 1).
# Overridable via INTAKE_FEMALE_SEX_CODE env var.
FEMALE_SEX_CODE = int(os.getenv("INTAKE_FEMALE_SEX_CODE", "1"))

# String spellings accepted as "female" when the host passes text.
FEMALE_SEX_LABELS: set[str] = {"1", "f", "female", "femme", "w", "woman"}

# Values that count as an affirmative answer for branching.  Anything else
# branches as "no".
YES_SENTINELS: set[str] = {"true", "Oui"}

# Lifestyle routing also tolerates the lowercase spelling.
LIFESTYLE_YES_SENTINELS: set[str] = YES_SENTINELS | {"oui"}

# Separators used to build the readable audit trail in case facts.
FRAGMENT_SEPARATOR = " | "
DIAGNOSIS_SEPARATOR = " — "

# Rendering of boolean answers in the journal and in labelled fragments.
YES_LABEL = "Oui"
NO_LABEL = "Non"

# Pseudo-domain of the per-domain gate questions.
SCREENING_DOMAIN = "screening"

# Suffix of the terminal "another case?" question closing every flow.
ANOTHER_CASE_SUFFIX = "_another_case"
