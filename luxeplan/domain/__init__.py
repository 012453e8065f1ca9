"""Business domains - each package holds its schemas, repository, service and router"""
