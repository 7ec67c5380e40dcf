"""Rules for OpenStack resources."""
