"""Services: spot price, marketplace client, export polling, repricing."""
