"""sftpdeploy — mirror a local directory onto a remote one over SFTP"""

__version__ = "0.3.0"
