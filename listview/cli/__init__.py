"""command line host for list view sessions"""
