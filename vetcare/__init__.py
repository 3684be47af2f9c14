"""VetCare boarding and shop backend"""
