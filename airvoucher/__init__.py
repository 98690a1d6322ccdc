"""AirVoucher voucher-sales portal."""
