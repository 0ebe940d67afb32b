"""SSM Parameter Store replication for AWS Lambda.

Mirrors Parameter Store changes from a source region into a target region
in response to EventBridge "Parameter Store Change" notifications.
"""
