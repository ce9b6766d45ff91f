"""cli - click entry point and rich console output"""
