"""Domain packages - one per business area, each with schemas, repository, service and router"""
