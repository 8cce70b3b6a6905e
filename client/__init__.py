"""HTTP client and command line front end for the BookStore API."""
