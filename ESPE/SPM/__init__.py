# =============================================================================
# SPM — Signal Processing Module
# =============================================================================
#
# The buffer-to-buffer effect stages.
#
# Modules:
#   echo_filter.py — recursive feedback echo with ring-out tail
#   normalizer.py  — attenuate-only peak normalizer
#   pipeline.py    — echo → normalize, plus report text and download name
