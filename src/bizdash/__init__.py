"""bizdash - filtering, statistics and calendar views for a small-business dashboard."""
