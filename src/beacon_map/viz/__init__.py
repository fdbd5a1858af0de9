"""beacon_map.viz"""
