# =============================================================================
# ESPE/SVM/__init__.py — Signal Verification Module
# =============================================================================
#
# Tools for checking the engine's output before it reaches the browser.
#
# Sub-modules:
#   echo_sim.py  — command-line pipeline runner with a sectioned report
#   validate.py  — self-validation suite for the whole ESPE stack
