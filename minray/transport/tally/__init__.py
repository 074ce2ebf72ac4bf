import minray.transport.tally.closeout as closeout
