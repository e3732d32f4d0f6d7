"""Protocol constants for the constant-product pool.

Fee and scaling factors are fixed at build time. Multiply-before-divide
ordering in cpamm.pricing depends on these exact values.
"""

# Shares minted to LOCK_HOLDER at genesis and never redeemable
MINIMUM_LOCK = 1000

# Protocol-owned sink for the locked shares (the zero address)
LOCK_HOLDER = "0x0000000000000000000000000000000000000000"

# Swap fee as a rational: 997/1000 of the input is priced (0.3% fee)
FEE_NUMERATOR = 997
FEE_DENOMINATOR = 1000

# Fixed-point scale for spot prices (1e18)
PRICE_SCALE = 10**18

# Upper bound for any committed reserve or share amount
UINT256_MAX = 2**256 - 1
