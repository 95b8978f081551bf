from .address import Address
