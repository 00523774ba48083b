#
# Testing package
#
