"""RDS instances and classic DB security groups."""
