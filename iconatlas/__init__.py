"""Icon Atlas: one browsing surface over many icon libraries."""
