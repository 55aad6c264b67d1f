from cipherdrive.databases.mongodb import mongodb
__all__ = ["mongodb"]
