"""Users domain - registration, roles and the admin user list"""
