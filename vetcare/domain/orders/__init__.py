"""Orders domain - Checkout, receipt verification and order status workflow"""
