import json
import logging

import requests

from models import ErrorKind, StageResult

logger = logging.getLogger(__name__)

UPLOAD_FAILED = 'Error uploading file to Pinata'


class PinataClient:
    def __init__(self, api_key, secret_api_key, pin_file_url, gateway_url, timeout=None, log=None):
        self.api_key = api_key
        self.secret_api_key = secret_api_key
        self.pin_file_url = pin_file_url
        self.gateway_url = gateway_url
        self.timeout = timeout
        self.log = log or logger

    def gateway_url_for(self, ipfs_hash):
        return f"{self.gateway_url.rstrip('/')}/{ipfs_hash}"

    def pin_file(self, data, name, description):
        """Pin image bytes and return the public gateway URL for them."""
        files = {
            'file': ('image.jpeg', data, 'image/jpeg'),
            'pinataMetadata': (None, json.dumps({
                'name': name,
                'keyvalues': {
                    'description': description,
                },
            })),
            'pinataOptions': (None, json.dumps({'cidVersion': 1})),
        }
        headers = {
            'pinata_api_key': self.api_key or '',
            'pinata_secret_api_key': self.secret_api_key or '',
        }

        try:
            response = requests.post(self.pin_file_url, files=files, headers=headers, timeout=self.timeout)
            if not response.ok:
                self.log.error(f'Pinata upload failed: {response.text}')
                response.raise_for_status()

            ipfs_hash = response.json()['IpfsHash']
            url = self.gateway_url_for(ipfs_hash)
            self.log.info(f'Content IPFS Hash: {ipfs_hash}')
            return StageResult.success(url)
        except Exception as e:
            self.log.error(f'Error uploading file to Pinata: {str(e)}')
            return StageResult.failure(ErrorKind.UPLOAD, UPLOAD_FAILED, str(e))
