"""
Eunoia Journal - Models Package
Themes, question scores, questionnaire copy and the daily entry
"""
