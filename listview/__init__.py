"""build list view configurations and provision them remotely"""
