# Client-side logic of the entry log web app: API access, form helpers,
# in-memory filtering and ID card QR parsing.
