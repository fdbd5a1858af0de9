"""beacon_map.core"""
